from setuptools import find_packages, setup

setup(
    name='terraunit',
    version='0.3',
    py_modules=['terraunit'],
    packages=find_packages(include=['deployunit', 'deployunit.*']),
    install_requires=[
        'Click',
        'python-hcl2',
        'PyYAML',
        'graphviz',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points='''
        [console_scripts]
        terraunit=terraunit:cli
    ''',
)
