from setuptools import setup

setup(
    name='hadoopgraphite',
    version='0.1dev',
    packages=['hadoopgraphite'],
    install_requires=['PyYAML'],
    extras_require={
        'test': ['pytest']
    },
    entry_points={
        'console_scripts': ['hadoopgraphite = hadoopgraphite.hadoopgraphite:main']
    }
)
