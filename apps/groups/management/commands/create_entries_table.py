# apps/groups/management/commands/create_entries_table.py

import boto3
from botocore.exceptions import ClientError
from django.core.management.base import BaseCommand, CommandError
from django.conf import settings


class Command(BaseCommand):
    help = 'Creates the DynamoDB table that holds the group entries, if it does not exist yet.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--no-wait',
            action='store_true',
            help="Return as soon as the create request is accepted instead of waiting for the table to become active."
        )

    def handle(self, *args, **options):
        table_name = settings.DYNAMODB_ENTRIES_TABLE
        client = boto3.client(
            'dynamodb',
            region_name=settings.AWS_REGION_NAME,
            endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
        )

        self.stdout.write(f"Creating table '{table_name}'...")
        try:
            client.create_table(
                TableName=table_name,
                KeySchema=[{'AttributeName': 'id', 'KeyType': 'HASH'}],
                AttributeDefinitions=[{'AttributeName': 'id', 'AttributeType': 'S'}],
                BillingMode='PAY_PER_REQUEST',
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'ResourceInUseException':
                self.stdout.write(self.style.WARNING(f"Table '{table_name}' already exists."))
                return
            raise CommandError(f"Failed to create table: {e}")

        if not options['no_wait']:
            client.get_waiter('table_exists').wait(TableName=table_name)

        self.stdout.write(self.style.SUCCESS(f"Table '{table_name}' is ready."))
