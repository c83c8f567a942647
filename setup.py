from setuptools import find_packages, setup

setup(
    name="openapi_declarations",
    packages=find_packages(exclude=["tests", "tests.*"]),
    version="0.1.0",
    description="Генератор Python объявлений и клиентов из Swagger 2.0 / OpenAPI 3.x",
    author="lite",
    license="MIT",
    install_requires=[
        "pydantic>=2.0.0",
        "toml>=0.10.0",
        "jsonref>=1.0.0",
        "httpx>=0.24.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "black>=23.0.0",
            "isort>=5.12.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "openapi-declarations = openapi_declarations.cli:generate",
        ],
    },
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
