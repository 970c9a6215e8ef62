import setuptools

with open('README.md') as infile:
    long_description = infile.read()

with open('VERSION') as infile:
    version = infile.read().strip()

setuptools.setup(
    name='nposlib',
    version=version,
    description='Nominated proof-of-stake validator elections for Python',
    long_description=long_description,
    long_description_content_type='text/markdown; charset=UTF-8',
    author='Jan Šimbera',
    author_email='simbera.jan@gmail.com',
    python_requires='>=3.7.0',
    url='https://github.com/simberaj/nposlib',
    packages=setuptools.find_packages(exclude=('tests', 'tests.*')),
    install_requires=[],
    extras_require={
        'test': ['pytest'],
        'docs': ['sphinx', 'recommonmark'],
    },
    include_package_data=True,
    license='MIT',
    keywords='npos election phragmen staking validator nominator python',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
    zip_safe=True
)
