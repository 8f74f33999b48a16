from setuptools import find_packages, setup

setup(
    name="hookchain",
    version="0.1.0",
    description="Ordered keyed listener chains with pre/post/failure hooks and tri-state result consensus",
    packages=find_packages(include=["hookchain", "hookchain.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2",
        "PyYAML>=6",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "hookchain=hookchain.cli:main",
        ],
    },
)
