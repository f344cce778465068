from setuptools import setup, find_packages

setup(
    name='modal-pad',
    version='0.1.0',
    description='Minimal modal (vi-style) terminal text editor',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    author='Siergej Sobolewski',
    author_email='s.sobolewski@hotmail.com',
    url='https://github.com/yourusername/modal-pad',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'toml>=0.10.2',
        'wcwidth>=0.2.6',
        'chardet>=5.0.0',
        'windows-curses>=2.3.0; sys_platform == "win32"',
    ],
    entry_points={
        'console_scripts': [
            'modal-pad = modal_pad.editor:main'
        ]
    },
    include_package_data=True,
    package_data={'modal_pad': ['config.toml']},
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python :: 3.11',
    ],
    python_requires='>=3.11',
    license='GPLv3',
)
