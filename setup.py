# Copyright (c) 2026 NASK. All rights reserved.

import glob
import os.path as osp
import sys

from setuptools import setup, find_packages


setup_dir, setup_filename = osp.split(osp.abspath(__file__))
setup_human_readable_ref = osp.join(osp.basename(setup_dir), setup_filename)

def get_varmix_version(filename_base):
    path_base = osp.join(setup_dir, filename_base)
    path_glob_pattern = path_base + '*'
    # The non-suffixed path variant should be
    # tried only if another one does not exist.
    matching_paths = sorted(glob.iglob(path_glob_pattern),
                            reverse=True)
    try:
        path = matching_paths[0]
    except IndexError:
        sys.exit('[{}] Cannot determine the varmix version '
                 '(no files match the pattern {!a}).'
                 .format(setup_human_readable_ref,
                         path_glob_pattern))
    try:
        with open(path, encoding='ascii') as f:
            return f.read().strip()
    except (OSError, UnicodeError) as exc:
        sys.exit('[{}] Cannot determine the varmix version '
                 '(an error occurred when trying to '
                 'read it from the file {!a} - {}).'
                 .format(setup_human_readable_ref,
                         path,
                         exc))


varmix_version = get_varmix_version('.varmix-version')

requirements = []
with open(osp.join(setup_dir, 'requirements'), encoding='ascii') as f:
    for raw_line in f:
        line = raw_line.strip()
        if not line or line.startswith('#'):
            continue
        requirements.append(line)

test_requirements = ['unittest_expander', 'pytest']


setup(
    name="varmix",
    version=varmix_version,

    packages=find_packages(include=['varmix', 'varmix.*']),
    install_requires=requirements,
    python_requires='>=3.9',
    include_package_data=True,
    zip_safe=False,
    tests_require=(requirements + test_requirements),
    extras_require={'test': test_requirements},

    description=('Conversion mix-ins between dataclass-based records '
                 'and dynamic value trees (Variants).'),
    maintainer='CERT Polska',
    maintainer_email='n6@cert.pl',
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: GNU Affero General Public License v3',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries',
    ],
    keywords='dataclass record variant conversion serialization mixin',
)
