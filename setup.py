import os

from setuptools import find_packages
from setuptools import setup


version = '0.1.0'


def read_requirements(filename):
    requires = []
    with open(os.path.join(os.path.dirname(__file__), filename)) as f:
        for line in f:
            req = line.split('#')[0].strip()
            if req:
                requires.append(req)
    return requires


install_requires = read_requirements('requirements.txt')
opt_install_requires = read_requirements('requirements_opt.txt')
test_install_requires = read_requirements('requirements_test.txt')

extra_all_requires = opt_install_requires + test_install_requires


console_scripts = ["smooth-path=sksmooth.apps.smooth_path:main"]


setup(
    name='scikit-smooth',
    version=version,
    description='Box constrained QP smoothing of discretized 2D paths',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Natural Language :: English',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Programming Language :: Python :: Implementation :: CPython',
    ],
    packages=find_packages(exclude=('tests', 'tests.*')),
    zip_safe=False,
    python_requires='>=3.8',
    install_requires=install_requires,
    entry_points={
        "console_scripts": console_scripts,
    },
    extras_require={
        'opt': opt_install_requires,
        'test': test_install_requires,
        'all': extra_all_requires,
    },
)
