from django.urls import path
from .views import (
    message_list_create, message_user_list, message_unread_count, message_detail,
    message_mark_all_read, message_eligible_recipients
)

urlpatterns = [
    path('messages/', message_list_create, name='message-list-create'),
    path('messages/eligible-recipients/', message_eligible_recipients, name='message-eligible-recipients'),
    path('messages/unread/count/', message_unread_count, name='message-unread-count'),
    path('messages/unread/count/<int:user_id>/', message_unread_count, name='message-unread-count-user'),
    path('messages/user/<int:user_id>/', message_user_list, name='message-user-list'),
    path('messages/read/all/<int:user_id>/', message_mark_all_read, name='message-mark-all-read'),
    path('messages/<int:pk>/', message_detail, name='message-detail'),
]
