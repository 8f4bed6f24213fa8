from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import ChatMessage, ChatRoom

# ==================== ADMIN CLASSES ====================

@admin.register(ChatRoom)
class ChatRoomAdmin(admin.ModelAdmin):
    list_display = (
        'name', 'room_type', 'team', 'is_room_active',
        'participants_display', 'total_messages', 'last_message_at',
    )
    list_filter = ('room_type', 'is_room_active', 'is_password_protected', 'team')
    search_fields = ('name', 'description', 'team__name')
    readonly_fields = (
        'current_participants', 'last_message_content', 'last_message_at',
        'total_messages', 'private_pair_key', 'created_at', 'updated_at',
    )
    exclude = ('password',)
    filter_horizontal = ('participants',)
    actions = ['activate_rooms', 'deactivate_rooms']

    def participants_display(self, obj):
        return f"{obj.current_participants}/{obj.max_participants}"
    participants_display.short_description = 'Participants'

    def activate_rooms(self, request, queryset):
        updated = queryset.update(is_room_active=True)
        self.message_user(request, f"{updated} chat rooms activated")
    activate_rooms.short_description = "Activate selected rooms"

    def deactivate_rooms(self, request, queryset):
        updated = queryset.update(is_room_active=False)
        self.message_user(request, f"{updated} chat rooms deactivated")
    deactivate_rooms.short_description = "Deactivate selected rooms"


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'room_link', 'author', 'message_type', 'created_at', 'content_short', 'is_pinned')
    list_filter = ('message_type', 'is_pinned', 'is_edited', 'created_at')
    search_fields = ('content', 'author__username', 'room__name')
    raw_id_fields = ('room', 'author', 'reply_to_message')

    def room_link(self, obj):
        url = reverse("admin:chat_chatroom_change", args=[obj.room_id])
        return format_html('<a href="{}">{}</a>', url, obj.room.name)
    room_link.short_description = 'Room'
    room_link.admin_order_field = 'room__name'

    def content_short(self, obj):
        return obj.get_message_summary(max_length=50)
    content_short.short_description = 'Content'
