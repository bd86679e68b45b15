from setuptools import setup

with open("README.md","r") as f:
    long_description = f.read()
exec(open("pyhankel/__version__.py").read())

setup(
        name='pyhankel',
        version=__version__,
        description='Quasi-discrete Hankel transforms for cylindrically and spherically symmetric problems',
        long_description=long_description,
        long_description_content_type="text/markdown",
        classifiers=[
            "Programming Language :: Python :: 3",
            "License :: OSI Approved :: MIT License",
            "Operating System :: OS Independent",
            "Topic :: Scientific/Engineering :: Mathematics",
            ],
        extras_require= {
            "dev": [
                "pytest","twine",
                ],
            },
        packages=["pyhankel", "pyhankel.util"],
        python_requires='>=3.8.0',
        install_requires=["numpy>=1.17.0","scipy>=1.3.2"]
)
