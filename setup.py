from setuptools import find_packages, setup

setup(
    name="employee-api",
    version="0.1.0",
    packages=find_packages(include=["employee_api", "employee_api.*"]),
    python_requires=">=3.10",
    install_requires=[
        "boto3>=1.26.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "SQLAlchemy>=2.0",
        "PyMySQL>=1.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
            "pytest-cov",
            "moto>=5.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "employee-api=employee_api.__main__:main",
        ]
    },
)
