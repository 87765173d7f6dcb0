"""
SysInfo QR Setup Script

For development installation:
    pip install -e .

For distribution:
    python setup.py sdist bdist_wheel
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

setup(
    name="sysinfo-qr",
    version="1.0.0",
    author="SysInfo QR Contributors",
    author_email="",
    description="Encode a machine's hardware fingerprint as a scannable QR code",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Hardware",
        "Topic :: System :: Systems Administration",
    ],
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "psutil>=5.9.0",
        "py-cpuinfo>=9.0.0",
        "PyYAML>=6.0",
        "platformdirs>=4.0.0",
        "msgpack>=1.0.0",
        "brotli>=1.1.0",
        "qrcode[pil]>=7.3,<7.4",
        "Pillow>=9.1.0",
    ],
    extras_require={
        "windows": ["pywin32>=306", "wmi>=1.5.1"],
        "dev": [
            "pytest>=7.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "sysinfo-qr=sysinfo_qr.qr_generator:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
