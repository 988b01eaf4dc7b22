import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Connector",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("owner_id", models.CharField(db_index=True, max_length=255)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "destinations",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Destination configurations: type, enabled flag and type-specific config",
                    ),
                ),
                (
                    "active",
                    models.BooleanField(
                        default=True, help_text="Inactive connectors reject submissions"
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["owner_id", "-created_at"], name="connector_owner_created_idx"
                    )
                ],
            },
        ),
    ]
