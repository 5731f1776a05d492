from setuptools import setup, find_packages

setup(
    name="clipmark",
    version="0.1.0",
    packages=find_packages(include=["clipmark", "clipmark.*"]),
    install_requires=[
        "rich>=13.0.0",  # Explicit minimum version
    ],
    extras_require={
        "player": ["python-mpv>=1.0.0"],
        "test": ["pytest", "pytest-mock"],
    },
    entry_points={
        "console_scripts": [
            "clipmark=clipmark.__main__:main",
        ],
    },
    python_requires=">=3.8",
)
