"""Top-level ack-deploy commands.

- init: scaffold Dockerfile, manifests, deploy script and .env.ack
- build: build (and push) the application image
- deploy: apply the manifests to the ACK cluster
- kubeconfig: fetch cluster credentials through the aliyun CLI
"""

from .build import build
from .deploy import deploy
from .init import init
from .kubeconfig import kubeconfig

__all__ = ["build", "deploy", "init", "kubeconfig"]
