from setuptools import setup, find_packages

setup(
    name="dice-engraver",
    version="0.1.0",
    description="Dice customization tool for engraving text, images and gradients into dice and exporting STL meshes",
    author="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["dice_engraver"],
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "trimesh",
        "scipy",
        "matplotlib",
        "tqdm",
        "Pillow>=10.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "dice-engraver=dice_engraver:main",
        ],
    },
)
