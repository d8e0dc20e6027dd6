from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()



setup(
    name="flowart",
    version="0.0.1",
    author="Marc Biester",
    author_email="marc.biester@gmail.com",
    description="Noise driven flow fields, rays and flowlines for generating plotable art",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["flowart", "flowart.*"]),
    install_requires=[
        "numpy",
        "scipy",
        "matplotlib",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
)
