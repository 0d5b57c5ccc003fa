"""
Packaging script for PyPI.
"""
import setuptools
from pathlib import Path

try:
	from boozetools.macroparse.runtime import make_tables
except ImportError:
	pass
else:
	make_tables(Path(__file__).parent / "nought" / "Nought.md")

setuptools.setup(
	name='nought-lang',
	version='0.1.0',
	packages=['nought'],
	package_data={
		'nought': ["Nought.md", "Nought.automaton"],
	},
	entry_points={
		'console_scripts': ["nought = nought.cmdline:main"],
	},
	license='MIT',
	description='A lazy, module-at-a-time interpreter for the nought expression language',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.10",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Interpreters",
		"Environment :: Console",
    ],
	python_requires='>=3.10',
	install_requires=[
		"booze-tools>=0.6.2.1",
		"requests>=2.28",
	]
)
