"""
netbuild - build orchestration for .NET applications.

Declares the build as a graph of named tasks and runs the external tools
(MSBuild, MSpec, NCover, FxCop, StyleCop, 7-Zip, Tarantino, MSDeploy, ...)
each task needs, failing fast on the first tool that exits with an error.
"""

__version__ = "0.1.0"
