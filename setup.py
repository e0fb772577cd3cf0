import setuptools

with open("README.md", "r", encoding="utf-8") as f:
  long_description = f.read()

setuptools.setup(
  name="ndview",
  version="0.1.0",
  author="borgwang",
  author_email="badbobobo@gamil.com",
  description="A strided n-dimensional array engine with zero-copy views",
  long_description=long_description,
  long_description_content_type="text/markdown",
  url="https://github.com/borgwang/ndview",
  packages=setuptools.find_packages(include=["ndview", "ndview.*"]),
  classifiers=[
      "Programming Language :: Python :: 3",
      "License :: OSI Approved :: MIT License",
  ],
  install_requires=["numpy", "networkx"],
  python_requires=">=3.8",
  extras_require={
    "graph": ["pydot"],
    "linting": ["flake8", "pylint", "mypy", "pre-commit"],
    "testing": ["pytest"],
  }
)
