from glob import glob
from setuptools import setup


setup(
    name='keycalc',
    use_scm_version={
        # Builds outside a git checkout still need a version.
        'fallback_version': '0.1.0',
    },
    description='Keypad calculator engine',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['keycalc'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.8',
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    setup_requires=[
        'setuptools_scm',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
            'bandit',
            'mypy',
            'safety',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
