"""Package up the dialog_facets Flask app."""

from setuptools import setup

with open("requirements.modules.txt") as f:
    requirements = f.read().splitlines()

with open("requirements.dev.txt") as f:
    test_requirements = [r for r in f.read().splitlines() if not r.startswith("-r")]

from dialog_facets import __version__

setup(
    name="dialog_facets",
    description="Open a single facet in a modal, non-modal or off-canvas dialog",
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={"test": test_requirements},
    license="MIT license",
    packages=[
        "dialog_facets",
        "dialog_facets.config",
        "dialog_facets.models",
        "dialog_facets.resources",
        "dialog_facets.services",
        "dialog_facets.shared",
    ],
    version=__version__,
    zip_safe=False,
)
