from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Sitemap",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("delta", models.PositiveIntegerField(default=1, verbose_name="Delta")),
                ("sitemap_string", models.TextField(verbose_name="Sitemap")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Sitemap",
                "verbose_name_plural": "Sitemaps",
                "ordering": ["name", "delta"],
            },
        ),
        migrations.CreateModel(
            name="SitemapCache",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, unique=True, verbose_name="Name")),
                ("sitemap_json", models.JSONField(default=dict, verbose_name="Sitemap JSON")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Sitemap cache",
                "verbose_name_plural": "Sitemap caches",
            },
        ),
        migrations.AddConstraint(
            model_name="sitemap",
            constraint=models.UniqueConstraint(fields=("name", "delta"), name="unique_sitemap_name_delta"),
        ),
    ]
