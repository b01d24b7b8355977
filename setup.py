import setuptools

with open("facetfs/.version") as f:
    version = f.read().strip()

setuptools.setup(
    name="facetfs",
    version=version,
    python_requires=">=3.11.0",
    author="blissful",
    author_email="blissful@sunsetglow.net",
    license="Apache-2.0",
    entry_points={"console_scripts": ["facetfs = facetfs.__main__:main"]},
    packages=["facetfs"],
    package_data={"facetfs": [".version", "py.typed"]},
    install_requires=[
        "appdirs",
        "click",
        "tomli-w",
        "uuid6",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
