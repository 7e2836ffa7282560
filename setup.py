#!/usr/bin/env python

import os
import re
from fnmatch import fnmatch

from setuptools import setup


def ispackage(x):
    return os.path.isdir(x) and os.path.exists(os.path.join(x, '__init__.py'))


def find_packages(where='valueshapes', exclude=('*__pycache__*',),
                  predicate=ispackage):
    func = lambda x: predicate(x) and not any(fnmatch(x, exc)
                                              for exc in exclude)
    return list(filter(func, [x[0] for x in os.walk(where)]))


packages = find_packages()


def read(filename):
    with open(filename, 'r') as f:
        return f.read()


def read_reqs(filename):
    return read(filename).strip().splitlines()


def version():
    init = read(os.path.join('valueshapes', '__init__.py'))
    return re.search(r"^__version__ = '([^']+)'", init, re.M).group(1)


def extras_require():
    extras = {req: read_reqs('etc/requirements_%s.txt' % req)
              for req in {'test'}}
    return extras


if __name__ == '__main__':
    setup(name='valueshapes',
          version=version(),
          description='Shapes of values: zero-copy views between flat real '
                      'vectors and named, structured variables',
          long_description=read('README.rst'),
          install_requires=read_reqs('etc/requirements.txt'),
          extras_require=extras_require(),
          python_requires='>=3.7',
          license='BSD',
          classifiers=['Development Status :: 3 - Alpha',
                       'Intended Audience :: Developers',
                       'Intended Audience :: Science/Research',
                       'License :: OSI Approved :: BSD License',
                       'Operating System :: OS Independent',
                       'Programming Language :: Python :: 3',
                       'Topic :: Scientific/Engineering'],
          packages=packages)
