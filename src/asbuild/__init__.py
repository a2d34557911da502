"""
asbuild - build orchestration for ActionScript projects.

Compiles ActionScript 3 sources into SWC libraries and SWF executables by
driving the compilers shipped with an AIR/Flex SDK.
"""

__version__ = "0.1.0"
