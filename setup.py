from setuptools import setup, find_packages


setup(
    name="pkz",
    version="0.1",
    packages=find_packages(include=["pkz", "pkz.*"]),
    description="Pack comic libraries (comics, volumes, chapters, pictures) into a single PKZ container.",
    author="vercingetorx",
    python_requires=">=3.8",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "pkz=pkz.cli:main",
        ]
    },
)
