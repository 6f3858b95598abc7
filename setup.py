from setuptools import setup

setup(
    name='legacy-apns',
    version='0.1.0',
    install_requires=[],
    extras_require={'test': ['pytest>=7.0']},
    python_requires='>=3.6',
    packages=['legacy_apns'],
    license='MIT',
    description='Blocking client for the binary Apple Push Notification '
                'Service protocol and its feedback service'
)
