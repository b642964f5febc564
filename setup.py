from setuptools import find_namespace_packages, setup


def read_requirements():
    with open("requirements.txt") as f:
        return [line for line in f.read().splitlines() if line and not line.startswith("#")]


setup(
    name="status-menu",
    version="0.1.0",
    description="Status area and status menu for mobile Linux desktops",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
    ],
    python_requires=">=3.11",
    install_requires=read_requirements(),
    extras_require={
        "dev": [
            "pygobject-stubs[Gtk4,Gdk]",
        ],
        "test": [
            "pytest",
        ],
    },
    scripts=["scripts/status-menu"],
    packages=find_namespace_packages(include=["status_menu*"]),
    package_data={"status_menu": ["resources/*.css"]},
    include_package_data=True,
)
