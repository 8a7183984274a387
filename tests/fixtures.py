"""Sample infrastructure sources and object factories shared across tests."""

import json
from unittest.mock import AsyncMock, MagicMock

TERRAFORM_WEB = """resource "aws_instance" "web" {
}
"""

TERRAFORM_FULL = """
terraform {
  required_providers {
    aws = {
      source = "hashicorp/aws"
    }
  }
}

provider "aws" {
  region = "us-east-1"
}

resource "aws_s3_bucket" "assets" {
  bucket = "my-assets"
  force_destroy = true
}

# Web server
resource "aws_instance" "web" {
  ami           = "ami-123456"
  instance_type = "t2.micro"
  count         = 2
  subnet_id     = aws_subnet.main.id
  depends_on    = [aws_s3_bucket.assets]

  root_block_device {
    volume_size = 20
  }

  tags = {
    Name = "web-{server}"
  }
}
"""

CLOUDFORMATION_BUCKET = '{"Resources":{"MyBucket":{"Type":"AWS::S3::Bucket","Properties":{}}}}'

CLOUDFORMATION_YAML = """AWSTemplateFormatVersion: "2010-09-09"
Resources:
  AppBucket:
    Type: AWS::S3::Bucket
    Properties:
      BucketName: !Sub "${AWS::StackName}-assets"
  AppServer:
    Type: AWS::EC2::Instance
    DependsOn: AppBucket
    Properties:
      ImageId: ami-123456
      SubnetId: !Ref PublicSubnet
      AvailabilityZone: !GetAtt PublicSubnet.AvailabilityZone
"""

ARM_TEMPLATE = json.dumps({
    "$schema": "https://schema.management.azure.com/schemas/2019-04-01/deploymentTemplate.json#",
    "contentVersion": "1.0.0.0",
    "resources": [
        {
            "type": "Microsoft.Storage/storageAccounts",
            "name": "stassets",
            "apiVersion": "2023-01-01",
            "properties": {"supportsHttpsTrafficOnly": True},
        },
        {
            "type": "Microsoft.Compute/virtualMachines",
            "name": "vm-web",
            "dependsOn": ["[resourceId('Microsoft.Storage/storageAccounts', 'stassets')]"],
            "properties": {"hardwareProfile": {"vmSize": "Standard_B1s"}},
        },
    ],
})

KUBERNETES_MANIFESTS = """apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
  namespace: shop
spec:
  replicas: 2
---
apiVersion: v1
kind: Service
metadata:
  name: web-svc
spec:
  ports:
    - port: 80
"""


def make_completion(content: str, model: str = "llama3-8b-8192") -> MagicMock:
    """Create a mock OpenAI ChatCompletion response."""
    choice = MagicMock()
    choice.message = MagicMock()
    choice.message.content = content
    choice.finish_reason = "stop"

    usage = MagicMock()
    usage.prompt_tokens = 12
    usage.completion_tokens = 34

    completion = MagicMock()
    completion.choices = [choice]
    completion.model = model
    completion.usage = usage
    return completion


def make_openai_client(completion: MagicMock | None = None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion)
    return client


def make_process(stdout: str = "", stderr: str = "", returncode: int = 0) -> MagicMock:
    """Create a mock asyncio subprocess that has already finished."""
    process = MagicMock()
    process.communicate = AsyncMock(return_value=(stdout.encode(), stderr.encode()))
    process.wait = AsyncMock(return_value=returncode)
    process.returncode = returncode
    return process
