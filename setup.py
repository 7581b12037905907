from setuptools import setup, find_namespace_packages

CORE_DEPS = [
    "playwright",
    "yt-dlp",
    "requests",
    "python-dotenv",
    "colorama>=0.4.6",
]

TEST_DEPS = [
    "pytest",
]

setup(
    name="vget",
    version="0.1.0",
    packages=find_namespace_packages(include=["vget", "vget.*"]),
    install_requires=CORE_DEPS,
    extras_require={
        "test": TEST_DEPS,
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "vget=vget.main:main",
        ],
    },
)
