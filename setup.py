from setuptools import setup, find_packages

setup(
    name             = 'chatlens',
    version          = '1.0.0',
    description      = 'chatlens — Accessibility-event chat & call record extraction engine',
    author           = 'Nous Loop Solutions',
    packages         = find_packages(exclude=['tests*']),
    install_requires = [
        line for line in open('requirements.txt').read().splitlines()
        if line.strip() and not line.startswith('#')
    ],
    extras_require   = {
        'test': ['pytest>=7'],
    },
    entry_points     = {
        'console_scripts': [
            'chatlens = chatlens.cli:main',
        ],
    },
    python_requires  = '>=3.10',
    classifiers      = [
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
