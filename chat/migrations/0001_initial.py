import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ChatRoom',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Chat room name', max_length=100)),
                ('description', models.TextField(blank=True, help_text='Purpose or rules of the room', max_length=1000, null=True)),
                ('room_type', models.CharField(choices=[('PRIVATE', 'Private (1:1)'), ('GROUP', 'Group'), ('PUBLIC', 'Public')], default='PRIVATE', help_text='Kind of chat room', max_length=10)),
                ('is_room_active', models.BooleanField(default=True, help_text='Inactive rooms accept no messages and no joins')),
                ('max_participants', models.PositiveIntegerField(default=2, help_text='Maximum number of participants')),
                ('current_participants', models.PositiveIntegerField(default=0, help_text='Number of users that joined the room')),
                ('profile_image_url', models.URLField(blank=True, help_text='Room image URL', max_length=500, null=True)),
                ('is_password_protected', models.BooleanField(default=False, help_text='Joining requires the room password')),
                ('password', models.CharField(blank=True, help_text='Hashed room password', max_length=255, null=True)),
                ('last_message_content', models.TextField(blank=True, help_text='Content of the most recent message', null=True)),
                ('last_message_at', models.DateTimeField(blank=True, help_text='Timestamp of the most recent message', null=True)),
                ('total_messages', models.PositiveIntegerField(default=0, help_text='Number of messages sent in the room')),
                ('private_pair_key', models.CharField(blank=True, editable=False, help_text='Sorted participant pair for private rooms', max_length=64, null=True, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Creation timestamp')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Last modification timestamp')),
                ('participants', models.ManyToManyField(blank=True, db_table='chat_room_participants', help_text='Users who joined this room', related_name='chat_rooms', to=settings.AUTH_USER_MODEL)),
                ('team', models.ForeignKey(blank=True, help_text='Owning team (empty for general rooms)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='chat_rooms', to='accounts.team')),
            ],
            options={
                'db_table': 'chat_rooms',
                'indexes': [
                    models.Index(fields=['room_type'], name='chat_rooms_room_ty_4b1f0e_idx'),
                    models.Index(fields=['is_room_active'], name='chat_rooms_is_room_9c2d71_idx'),
                    models.Index(fields=['created_at'], name='chat_rooms_created_6e8a3b_idx'),
                    models.Index(fields=['name'], name='chat_rooms_name_0d5c42_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ChatMessage',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('content', models.TextField(help_text='Message text content')),
                ('message_type', models.CharField(choices=[('TEXT', 'Text'), ('IMAGE', 'Image'), ('VIDEO', 'Video'), ('FILE', 'File'), ('SYSTEM', 'System')], default='TEXT', help_text='Kind of message', max_length=10)),
                ('is_read', models.BooleanField(default=False, help_text='Read status')),
                ('is_edited', models.BooleanField(default=False, help_text='Content was edited after sending')),
                ('is_pinned', models.BooleanField(default=False, help_text='Pinned in the room')),
                ('read_at', models.DateTimeField(blank=True, help_text='When the message was read', null=True)),
                ('edited_at', models.DateTimeField(blank=True, help_text='When the message was last edited', null=True)),
                ('attachment_url', models.URLField(blank=True, help_text='Attachment URL', max_length=1000, null=True)),
                ('attachment_name', models.CharField(blank=True, help_text='Original attachment file name', max_length=255, null=True)),
                ('attachment_size', models.BigIntegerField(blank=True, help_text='Attachment size in bytes', null=True)),
                ('reaction_count', models.PositiveIntegerField(default=0, help_text='Number of reactions')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Creation timestamp')),
                ('author', models.ForeignKey(help_text='Message author', on_delete=django.db.models.deletion.CASCADE, related_name='chat_messages', to=settings.AUTH_USER_MODEL)),
                ('reply_to_message', models.ForeignKey(blank=True, help_text='Message this one replies to (same room)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='replies', to='chat.chatmessage')),
                ('room', models.ForeignKey(help_text='Room this message belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='messages', to='chat.chatroom')),
            ],
            options={
                'db_table': 'chat_messages',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['room', 'created_at'], name='chat_messag_room_id_8f3e21_idx'),
                    models.Index(fields=['message_type'], name='chat_messag_message_2a7c90_idx'),
                    models.Index(fields=['is_read'], name='chat_messag_is_read_5b9d14_idx'),
                ],
            },
        ),
    ]
