from setuptools import find_packages, setup

with open("requirements.txt", "r") as f:
    requirements = [r for r in map(str.strip, f.read().split("\n")) if r]

setup(
    name="ez-sync-bridge",
    packages=find_packages(exclude=["tests", "tests.*"]),
    version="0.1.0",
    description="Block synchronous code on asynchronous computations without deadlocking single-threaded contexts.",
    license="MIT",
    install_requires=requirements,
    extras_require={
        "test": ["pytest", "pytest-asyncio-cooperative"],
    },
    python_requires=">=3.9",
    package_data={
        "sync_bridge": ["py.typed"],
    },
    include_package_data=True,
    zip_safe=False,
)
