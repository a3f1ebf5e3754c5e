[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netlab"
version = "0.1.0"
description = "Small socket exercises: TCP and UDP message exchange, a file fetcher, and stop-and-wait, go-back-N and selective-repeat ARQ demos"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sockets",
    "tcp",
    "udp",
    "file-transfer",
    "arq",
    "stop-and-wait",
    "go-back-n",
    "selective-repeat",
    "networking",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
netlab-tcp-server = "netlab.tcp:server_main"
netlab-tcp-client = "netlab.tcp:client_main"
netlab-udp-server = "netlab.udp:server_main"
netlab-udp-client = "netlab.udp:client_main"
netlab-ftp-server = "netlab.ftp:server_main"
netlab-ftp-client = "netlab.ftp:client_main"
netlab-snw-server = "netlab.snw:server_main"
netlab-snw-client = "netlab.snw:client_main"
netlab-gbn-server = "netlab.gbn:server_main"
netlab-gbn-client = "netlab.gbn:client_main"
netlab-srp-server = "netlab.srp:server_main"
netlab-srp-client = "netlab.srp:client_main"

[tool.hatch.build.targets.wheel]
packages = ["netlab"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
