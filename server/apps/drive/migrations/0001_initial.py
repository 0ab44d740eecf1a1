import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Folder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('is_starred', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('modified_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, default=None, help_text='Set when the item is moved to trash', null=True)),
                ('parent', models.ForeignKey(blank=True, help_text='Containing folder; null for root', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='subfolders', to='drive.folder')),
            ],
            options={
                'verbose_name': 'Folder',
                'verbose_name_plural': 'Folders',
                'ordering': ['name', 'id'],
                'indexes': [models.Index(fields=['parent', 'deleted_at'], name='drive_folder_parent_idx')],
            },
        ),
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('is_starred', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('modified_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, default=None, help_text='Set when the item is moved to trash', null=True)),
                ('storage_key', models.CharField(editable=False, help_text='Opaque blob store key', max_length=512, unique=True)),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('mime_type', models.CharField(default='application/octet-stream', help_text='MIME type guessed from the file name', max_length=255)),
                ('parent', models.ForeignKey(blank=True, help_text='Containing folder; null for root', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='files', to='drive.folder')),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['name', 'id'],
                'indexes': [models.Index(fields=['parent', 'deleted_at'], name='drive_file_parent_idx'), models.Index(fields=['-created_at'], name='drive_file_recent_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('size_bytes__gte', 0)), name='drive_file_size_non_negative')],
            },
        ),
    ]
