from setuptools import setup

setup(
    name="openhtl",
    version="0.1.0",
    description="A hydrothermal liquefaction kinetic and techno-economic simulation library",
    author="Your Name",
    packages=["openhtl"],
    package_data={"openhtl": ["data/*.json"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "scipy",
        "numpy-financial",
        "pandas",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["openhtl=openhtl.cli:main"]},
    zip_safe=False,
)
