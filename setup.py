from setuptools import setup, find_packages

setup(
    name="radio-metadata-monitor",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "requests",
        "python-dotenv",
    ],
    extras_require={
        "tests": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "radio-metadata=radio_metadata_monitor.cli:main",
        ],
    },
    author="Your Name",
    author_email="your.email@example.com",
    description="Now playing metadata from internet radio streams (ICY and JSON fallbacks)",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/chrisfonte/radio-metadata-monitor",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
