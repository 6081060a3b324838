import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
    ]

    operations = [
        migrations.CreateModel(
            name='Send',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('uuid', models.CharField(blank=True, db_index=True, help_text='Correlation id from the send uuid header or the transport Message-ID', max_length=255, null=True)),
                ('mail_class', models.CharField(blank=True, db_index=True, help_text='Decrypted mail class header', max_length=255, null=True)),
                ('subject', models.TextField(blank=True)),
                ('content', models.TextField(blank=True, help_text='HTML body, only when content storage is enabled', null=True)),
                ('from_address', models.JSONField(blank=True, db_column='from', null=True)),
                ('reply_to', models.JSONField(blank=True, null=True)),
                ('to', models.JSONField(blank=True, null=True)),
                ('cc', models.JSONField(blank=True, null=True)),
                ('bcc', models.JSONField(blank=True, null=True)),
                ('sent_at', models.DateTimeField(db_index=True)),
            ],
            options={
                'ordering': ['-sent_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Sendable',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('object_id', models.PositiveBigIntegerField()),
                ('content_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='contenttypes.contenttype')),
                ('send', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sendables', to='sends.send')),
            ],
            options={
                'indexes': [models.Index(fields=['content_type', 'object_id'], name='sendable_target_idx')],
                'constraints': [models.UniqueConstraint(fields=('send', 'content_type', 'object_id'), name='unique_sendable')],
            },
        ),
    ]
