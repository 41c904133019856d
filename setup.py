"""
Setup script for ringside-lifecycle package with Cython compilation.

This builds the internal modules (_*/ packages) as compiled extensions
when Cython is available, while keeping the public API (engine.py,
errors.py, types.py, cli.py) as readable Python source.
"""

from setuptools import setup, find_packages, Extension
import glob
import os

# Check if Cython is available
try:
    from Cython.Build import cythonize
    USE_CYTHON = True
except ImportError:
    USE_CYTHON = False
    print("Cython not found. Building without compilation (source only).")

# Internal modules to compile with Cython
CYTHON_MODULES = [
    path
    for pattern in (
        "src/ringside/_lifecycle/*.py",
        "src/ringside/_store/*.py",
        "src/ringside/_shared/logging_config.py",
        "src/ringside/_config.py",
    )
    for path in sorted(glob.glob(pattern))
    if not path.endswith("__init__.py")
]


def get_extensions():
    """Build Extension objects for Cython compilation."""
    if not USE_CYTHON:
        return []

    extensions = []
    for module_path in CYTHON_MODULES:
        if os.path.exists(module_path):
            # Convert path to module name: src/ringside/_store/database.py -> ringside._store.database
            module_name = module_path.replace("src/", "").replace("/", ".").replace(".py", "")
            extensions.append(
                Extension(
                    name=module_name,
                    sources=[module_path],
                )
            )
    return extensions


def get_ext_modules():
    """Get extension modules, cythonized if Cython is available."""
    extensions = get_extensions()
    if not extensions:
        return []

    return cythonize(
        extensions,
        compiler_directives={
            "language_level": "3",
            "boundscheck": False,
            "wraparound": False,
        },
        nthreads=os.cpu_count() or 1,
    )


# Only add ext_modules if we have Cython
ext_modules = get_ext_modules() if USE_CYTHON else []

setup(
    name="ringside-lifecycle",
    version="1.0.0",
    description="Temporal status lifecycle engine for wrestling promotion rosters",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    ext_modules=ext_modules,
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "cython>=3.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "ringside=ringside.cli:main",
        ],
    },
    # Schema ships with the store; compiled .so/.pyd files with their packages
    package_data={
        "ringside._store": ["schema.sql", "*.so", "*.pyd"],
        "ringside._lifecycle": ["*.so", "*.pyd"],
        "ringside._shared": ["*.so", "*.pyd"],
        "ringside": ["*.so", "*.pyd"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Cython",
    ],
)
