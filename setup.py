from setuptools import setup, find_packages

main_ns = {}
with open("src/gridbook/_version.py") as ver_file:
    exec(ver_file.read(), main_ns)

setup(
    name="gridbook",
    version=main_ns["__version__"],
    description="Spreadsheet workbook model with row and column style inheritance",
    license="MIT",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    entry_points={
        "console_scripts": [
            "cat-gridbook=gridbook._cat_gridbook:main",
            "unpack-gridbook=gridbook._unpack_gridbook:main",
        ],
    },
    install_requires=["protobuf", "python-snappy", "pendulum", "enum-tools", "compact-json"],
    extras_require={
        "test": ["pytest", "pytest-check", "pytest-console-scripts"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
