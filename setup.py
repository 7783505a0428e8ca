from setuptools import setup, find_packages

setup(
    name="irisloc",
    version="1.0.0",
    description="Pupil localization with fused edge maps and a coarse-to-fine circular Hough transform",
    author="irisloc",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "opencv-python>=4.8.0",
        "numpy>=1.24.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "scipy>=1.10.0",
        ],
    },
    python_requires=">=3.9",
)
