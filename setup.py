from setuptools import setup, find_namespace_packages

CORE_DEPS = [
    "requests",
    "defusedxml",
    "python-dotenv",
    "colorama",
]

TEST_DEPS = [
    "pytest",
]

setup(
    name="embedr",
    version="0.1.0",
    description="OEmbed client: resolve media URLs into provider embed data",
    packages=find_namespace_packages(include=["embedr", "embedr.*"]),
    python_requires=">=3.8",
    install_requires=CORE_DEPS,
    extras_require={
        "test": TEST_DEPS,
    },
    entry_points={
        "console_scripts": [
            "embedr=embedr.main:main",
        ],
    },
)
