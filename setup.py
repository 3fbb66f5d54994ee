"""
/setup.py

Packaging for the transcript-to-LaTeX converter.
"""

import setuptools

with open("requirements.txt", "r", encoding="utf-8") as file:
    requirements = file.read().splitlines()

setuptools.setup(
    name="transcript-tex",
    version="0.1.0",
    description="Typeset exported chat transcripts with their attachments",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src", exclude=["*.tests"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "txt2tex = transcript_tex.commands:main",
        ]
    },
)
