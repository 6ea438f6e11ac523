import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('value', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('label', models.CharField(max_length=100)),
            ],
            options={
                'verbose_name_plural': 'Categories',
                'ordering': ['label'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Country',
            fields=[
                ('value', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('label', models.CharField(max_length=100)),
            ],
            options={
                'verbose_name_plural': 'Countries',
                'ordering': ['label'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='LayoutSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('logo_url', models.URLField(blank=True, max_length=1024)),
                ('nav_links', models.JSONField(blank=True, default=list, help_text='List of {"label": ..., "href": ...} objects.')),
                ('footer_content', models.TextField(blank=True)),
                ('background_settings', models.JSONField(blank=True, default=dict)),
                ('homepage_seo_content', models.TextField(blank=True)),
                ('seo_settings', models.JSONField(blank=True, default=dict)),
            ],
            options={
                'verbose_name': 'Layout Settings',
                'verbose_name_plural': 'Layout Settings',
            },
        ),
        migrations.CreateModel(
            name='ModerationSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('cooldown_enabled', models.BooleanField(default=True, help_text='Require a waiting period before the same link can be resubmitted.')),
                ('cooldown_value', models.PositiveIntegerField(default=6, help_text='Length of the cooldown, in the unit below.', validators=[django.core.validators.MinValueValidator(1)])),
                ('cooldown_unit', models.CharField(choices=[('hours', 'Hours'), ('days', 'Days'), ('months', 'Months')], default='hours', help_text='Months are counted as 30 days.', max_length=10)),
                ('groups_per_page', models.PositiveIntegerField(default=20, help_text='Number of groups shown per listing page.', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(100)])),
                ('featured_groups_display', models.CharField(choices=[('slider', 'Slider'), ('grid', 'Grid'), ('list', 'List')], default='slider', max_length=10)),
                ('show_newsletter', models.BooleanField(default=False)),
                ('show_dynamic_seo_content', models.BooleanField(default=False)),
                ('show_ratings', models.BooleanField(default=True, help_text='Expose rating totals and averages in public listings.')),
                ('show_clicks', models.BooleanField(default=True, help_text='Expose click counters in public listings.')),
            ],
            options={
                'verbose_name': 'Moderation Settings',
                'verbose_name_plural': 'Moderation Settings',
            },
        ),
    ]
