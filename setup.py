from setuptools import find_packages, setup

setup(
    name="caption-editor-backend",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["app", "bootloader"],
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "aiohttp",
        "openai>=1",
        "python-dotenv",
        "PyYAML",
        "python-multipart",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
    include_package_data=True,
    python_requires=">=3.10",
    description="Backend for the short-form caption editor (caption timing and playback sync)",
)
