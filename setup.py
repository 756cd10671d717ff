from setuptools import setup, find_packages

# Read dependencies from requirements.txt
with open("requirements.txt", encoding="utf-8") as f:
    requirements = []
    for line in f:
        line = line.strip()
        if line and not line.startswith("#"):
            requirements.append(line)

setup(
    name="mlog-analyzer",
    version="1.0.0",
    description="Rule-based crash/launch log analyzer for mobile Minecraft launchers",
    packages=find_packages(include=[
        "mlog_core", "mlog_core.*",
        "mlog_service", "mlog_service.*",
        "config", "config.*",
    ]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.25",
        ],
    },
    entry_points={
        "console_scripts": [
            "mlog=mlog_service.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Topic :: Utilities",
        "Topic :: Games/Entertainment :: Simulation",
    ],
)
