from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent

# Read requirements (ignore comments and recursive -r entries)
req_path = ROOT / "requirements.txt"
requirements = []
if req_path.exists():
    for line in req_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("-r"):
            continue
        requirements.append(line)

# Exclude strict platform-specific markers from base install_requires
core_requirements = [
    r for r in requirements if not any(marker in r for marker in ["; platform_system==", "; platform_machine=="])
]

readme = (ROOT / "README.md").read_text(encoding="utf-8") if (ROOT / "README.md").exists() else ""

setup(
    name="watering-system",
    version="1.0.0",
    description="Schedule-driven irrigation pump controller with flow anomaly alerts",
    long_description=readme,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*", "docs")),
    py_modules=["watering_system_app"],
    python_requires=">=3.10,<4",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-flask>=1.2.0",
            "pytest-cov>=4.1.0",
            "black>=23.7.0",
            "flake8>=6.0.0",
            "mypy>=1.5.0",
        ],
        "hardware": [
            "RPi.GPIO>=0.7.1",
            "adafruit-circuitpython-ads1x15>=2.2.21",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Home Automation",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: POSIX :: Linux",
    ],
    keywords="iot irrigation watering raspberry-pi pump sensors automation",
    entry_points={
        "console_scripts": [
            "watering-system=watering_system_app:main",
        ]
    },
    include_package_data=True,
    package_data={
        "app": ["templates/*.html", "static/*.css"],
    },
)
