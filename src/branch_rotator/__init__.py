"""Top‑level package for Branch Rotator.

Branch Rotator checks out a randomly chosen branch of a local repository
and then runs that repository's publish script.  See ``branch_rotator.config``
for the environment variables it reads.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
