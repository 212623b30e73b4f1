from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="pyfastscale",
    version="0.1.0",
    description="Image resampling with selectable filters, gamma-correct processing and a Taichi GPU path",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics",
        "Topic :: Scientific/Engineering :: Image Processing",
    ],
    python_requires=">=3.10",
    install_requires=[
        "taichi>=1.6.0",
        "numpy>=1.20.0",
        "click>=7.0",
        "pillow>=8.0.0",
        "rich>=12.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "black",
            "flake8",
        ],
    },
    keywords="image resize resampling lanczos gamma unsharp GPU taichi",
    entry_points={
        "console_scripts": [
            "pfs-resize=pyfastscale.cli.resize_commands:resize_image",
            "pfs-filters=pyfastscale.cli.resize_commands:list_filters",
        ],
    },
)
