from setuptools import find_packages, setup

with open("./README.md", encoding='utf-8') as in_:
    setup(
        name='xlsxwriter-cellwriters',
        version='0.1.0',
        packages=find_packages(where='src'),
        package_dir={
            "": "src"
        },
        license='MIT',
        description='Writer combinators for XlsxWriter: compose size-aware cell writers, formatters and tables '
                    'without tracking absolute coordinates.',
        long_description=in_.read(),
        long_description_content_type="text/markdown",
        python_requires='>=3.8',
        install_requires=[
            "attrs",
            "xlsxwriter",
        ],
        extras_require={
            'testing': ['pytest', 'pytest-mock']
        },
    )
