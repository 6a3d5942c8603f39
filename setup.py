"""Install the micro-auth package."""

from setuptools import setup, find_packages

setup(
    name='micro-auth',
    version='0.1.0',
    packages=find_packages(include=['micro_auth', 'micro_auth.*'],
                           exclude=['*test*']),
    python_requires='>=3.8',
    install_requires=[
        "sqlalchemy>=1.4",
        "bcrypt",
        "pytz",
        "python-dateutil",
    ],
    extras_require={
        'test': [
            "pytest",
            "hypothesis",
            "mimesis",
        ]
    },
    zip_safe=False
)
