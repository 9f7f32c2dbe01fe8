import os
from setuptools import (
    setup,
    find_packages,
)

with open(os.path.join('src', 'cpcgrid', 'version.py')) as f:
    exec(f.read())


setup(
    name="cpcgrid",
    version=__version__,
    description="Fixed-topology latitude/longitude grids for gridded climate observations",
    license="MIT",

    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    python_requires='>=3.9',

    install_requires=[
        'click',
        'numpy',
        'pydantic-settings',
        'rasterio',
    ],

    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
        ],
    },

    entry_points={
        'console_scripts': [
            'cpcgrid = cpcgrid.cli:main',
        ],
    },
)
