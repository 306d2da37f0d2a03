from setuptools import setup, find_packages

setup(
    name='devicesamples',
    version='0.1',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    package_data={'devicesamples': ['resources/.devicesamplesrc']},
    python_requires='>=3.10',
    install_requires=[
        'frozendict',
        'returns',
        'toml',
    ],
    extras_require={
        'test': ['pytest'],
    },
    license='GNU GPLv3',
    author='Dominic Steinhoefel',
    author_email='dominic.steinhoefel@cispa.de',
    description='Parser for recorded device samples and example programs'
)
