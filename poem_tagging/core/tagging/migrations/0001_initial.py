import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import poem_tagging.lib.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Vocabulary",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "name",
                    poem_tagging.lib.fields.MultiCollationCharField(
                        db_collations={"mysql": "utf8mb4_unicode_ci", "sqlite": "NOCASE"},
                        help_text="Machine name used to look up this vocabulary, e.g. 'tags'.",
                        max_length=255,
                        unique=True,
                    ),
                ),
                (
                    "description",
                    models.TextField(
                        blank=True,
                        help_text="Provides extra information about what the vocabulary is used for.",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "vocabularies",
            },
        ),
        migrations.CreateModel(
            name="Term",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "name",
                    poem_tagging.lib.fields.MultiCollationCharField(
                        db_collations={"mysql": "utf8mb4_unicode_ci", "sqlite": "NOCASE"},
                        help_text="Display name of the term.",
                        max_length=255,
                    ),
                ),
                (
                    "vocabulary",
                    models.ForeignKey(
                        help_text="Vocabulary this term belongs to.",
                        on_delete=django.db.models.deletion.CASCADE,
                        to="pt_tagging.vocabulary",
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["vocabulary", "name"], name="pt_term_vocabulary_name_idx")],
            },
        ),
        migrations.CreateModel(
            name="Record",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "record_type",
                    poem_tagging.lib.fields.MultiCollationCharField(
                        db_collations={"mysql": "utf8mb4_bin", "sqlite": "BINARY"},
                        db_index=True,
                        help_text="Content type of the record, e.g. 'poem'.",
                        max_length=64,
                    ),
                ),
                ("title", models.CharField(blank=True, max_length=255)),
            ],
        ),
        migrations.CreateModel(
            name="TagReference",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "position",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Order of this tag within the record's tag field.",
                    ),
                ),
                (
                    "record",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tag_references",
                        to="pt_tagging.record",
                    ),
                ),
                (
                    "term",
                    models.ForeignKey(
                        help_text="Term this reference points at.",
                        on_delete=django.db.models.deletion.CASCADE,
                        to="pt_tagging.term",
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["record", "position"], name="pt_tagref_record_position_idx")],
            },
        ),
        migrations.CreateModel(
            name="CleanupRun",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "kind",
                    models.CharField(
                        choices=[("fix_tags", "Fix tags"), ("reclaim_terms", "Reclaim unused terms")],
                        help_text="Operation performed by this run",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("running", "Running"), ("success", "Success"), ("error", "Error")],
                        help_text="Run status",
                        max_length=20,
                    ),
                ),
                ("log", models.TextField(blank=True, default="", help_text="Progress messages")),
                ("processed", models.PositiveIntegerField(default=0)),
                ("with_tags", models.PositiveIntegerField(default=0)),
                ("without_tags", models.PositiveIntegerField(default=0)),
                ("removed", models.PositiveIntegerField(default=0)),
                ("started", models.DateTimeField(default=django.utils.timezone.now)),
                ("finished", models.DateTimeField(blank=True, default=None, null=True)),
            ],
            options={
                "indexes": [models.Index(fields=["kind", "-started"], name="pt_cleanuprun_kind_idx")],
            },
        ),
        migrations.CreateModel(
            name="CleanupSetting",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "name",
                    poem_tagging.lib.fields.MultiCollationCharField(
                        db_collations={"mysql": "utf8mb4_bin", "sqlite": "BINARY"},
                        max_length=128,
                        unique=True,
                    ),
                ),
                ("value", models.JSONField(blank=True, default=None, null=True)),
            ],
        ),
    ]
