"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/asbuild/asbuild"
KEYWORDS = "actionscript air flex swc swf compc mxmlc build-tool"
HERE = os.path.dirname(os.path.abspath(__file__))

if __name__ == "__main__":
    setup(
        name="asbuild",
        version="0.1.0",
        description="Build orchestration for ActionScript projects (SWC/SWF via the AIR SDK compilers)",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["asbuild=asbuild.cli:main"]},
        include_package_data=True,
    )
