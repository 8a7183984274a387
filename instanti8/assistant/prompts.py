"""Prompt text and offline fallback templates for the assistant."""

SYSTEM_PROMPT = """You are an expert cloud infrastructure and DevOps assistant for instanti8.dev, a multi-cloud deployment platform. Your role is to help users with:

1. Infrastructure planning and architecture recommendations
2. Troubleshooting deployment issues across Azure, AWS, GCP and other cloud providers
3. Generating Infrastructure as Code (Terraform, Pulumi, Docker)
4. Optimizing cloud costs and performance
5. Security best practices and compliance
6. Real-time deployment assistance and error resolution

Always provide practical, actionable advice with code examples when relevant. Be concise but thorough."""

CODE_PROMPT = """Generate {code_type} code for {provider} based on this request: "{prompt}".

Provide:
1. Complete, production-ready code
2. Proper resource naming conventions
3. Best security practices
4. Cost optimization considerations

Format your response as:
CODE:
[your code here]

EXPLANATION:
[explanation here]"""

FALLBACK_SUGGESTIONS = [
    "Configure cloud provider credentials",
    "Review infrastructure requirements",
    "Check deployment logs for errors",
    "Verify resource quotas and limits",
]

AZURE_FALLBACK_TEMPLATE = """# Terraform configuration for Azure
# Generated from: {prompt}

terraform {{
  required_providers {{
    azurerm = {{
      source  = "hashicorp/azurerm"
      version = "~>3.0"
    }}
  }}
}}

provider "azurerm" {{
  features {{}}
}}

resource "azurerm_resource_group" "main" {{
  name     = "instanti8-{resource_name}-rg"
  location = "East US"

  tags = {{
    Environment = "Development"
    CreatedBy   = "instanti8.dev"
    Project     = "{resource_name}"
  }}
}}"""

PLACEHOLDER_TEMPLATE = """# {code_type} code for {provider}
# Generated from prompt: {prompt}

# Configure your {provider} resources here"""


def fallback_resource_name(prompt: str) -> str:
    """Short resource label derived from what the prompt asks for."""
    lowered = prompt.lower()
    if "database" in lowered:
        return "database"
    if "storage" in lowered:
        return "storage"
    if "compute" in lowered or "vm" in lowered:
        return "compute"
    if "network" in lowered:
        return "network"
    return "infrastructure"


def fallback_code(prompt: str, provider: str, code_type: str) -> str:
    if provider == "azure":
        return AZURE_FALLBACK_TEMPLATE.format(
            prompt=prompt, resource_name=fallback_resource_name(prompt)
        )
    return PLACEHOLDER_TEMPLATE.format(prompt=prompt, provider=provider, code_type=code_type)
