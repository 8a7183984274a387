"""Tests for the line-scanning Terraform parser."""

from instanti8.importer.parsers.terraform import parse_terraform
from tests.fixtures import TERRAFORM_FULL, TERRAFORM_WEB


class TestResourceBlocks:
    def test_minimal_resource(self):
        resources = parse_terraform(TERRAFORM_WEB)
        assert len(resources) == 1
        assert resources[0].type == "aws_instance"
        assert resources[0].name == "web"
        assert resources[0].dialect == "terraform"

    def test_empty_source_yields_nothing(self):
        assert parse_terraform("") == []

    def test_brace_on_its_own_line(self):
        source = 'resource "aws_s3_bucket" "b"\n{\n  bucket = "x"\n}\n'
        resources = parse_terraform(source)
        assert len(resources) == 1
        assert resources[0].config == {"bucket": "x"}

    def test_single_line_block(self):
        resources = parse_terraform('resource "null_resource" "noop" {}\n')
        assert [(r.type, r.name) for r in resources] == [("null_resource", "noop")]

    def test_non_resource_blocks_are_ignored(self):
        resources = parse_terraform(TERRAFORM_FULL)
        assert [r.type for r in resources] == ["aws_s3_bucket", "aws_instance"]

    def test_nested_block_does_not_end_resource(self):
        source = (
            'resource "aws_instance" "a" {\n'
            "  ebs_block_device {\n"
            "    volume_size = 8\n"
            "  }\n"
            '  ami = "ami-1"\n'
            "}\n"
            'resource "aws_instance" "b" {\n'
            "}\n"
        )
        resources = parse_terraform(source)
        assert [r.name for r in resources] == ["a", "b"]
        assert resources[0].config == {"ami": "ami-1"}

    def test_unclosed_resource_is_discarded(self):
        source = 'resource "aws_instance" "ok" {\n}\nresource "aws_instance" "broken" {\n  ami = "x"\n'
        assert [r.name for r in parse_terraform(source)] == ["ok"]

    def test_braces_in_strings_and_comments_are_ignored(self):
        source = (
            'resource "aws_instance" "web" {\n'
            '  user_data = "echo }"\n'
            "  # closing } in a comment\n"
            "}\n"
        )
        resources = parse_terraform(source)
        assert len(resources) == 1
        assert resources[0].config == {"user_data": "echo }"}


class TestAttributes:
    def test_top_level_attributes_are_captured(self):
        web = parse_terraform(TERRAFORM_FULL)[1]
        assert web.config == {
            "ami": "ami-123456",
            "instance_type": "t2.micro",
            "count": 2,
            "subnet_id": "aws_subnet.main.id",
        }

    def test_bool_values(self):
        assets = parse_terraform(TERRAFORM_FULL)[0]
        assert assets.config == {"bucket": "my-assets", "force_destroy": True}

    def test_depends_on_list(self):
        web = parse_terraform(TERRAFORM_FULL)[1]
        assert web.depends_on == ["aws_s3_bucket.assets"]
        assert "depends_on" not in web.config

    def test_multiline_values_are_skipped(self):
        source = (
            'resource "aws_security_group" "sg" {\n'
            "  cidr_blocks = [\n"
            '    "10.0.0.0/8",\n'
            "  ]\n"
            '  name = "sg"\n'
            "}\n"
        )
        resources = parse_terraform(source)
        assert resources[0].config == {"name": "sg"}
