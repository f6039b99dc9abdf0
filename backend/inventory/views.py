import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from .models import InventoryItem, InventoryAdjustment
from .serializers import InventoryItemSerializer, InventoryAdjustmentSerializer
from backend.core.permissions import user_has_privilege, privilege_denied
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_list_create(request):
    """List inventory items with optional filtering or add a new item"""
    if request.method == 'GET':
        items = InventoryItem.objects.all()
        category = request.query_params.get('category')
        item_status = request.query_params.get('status')
        search = request.query_params.get('search')
        if category:
            items = items.filter(category__iexact=category)
        if item_status:
            items = items.filter(status=item_status)
        if search:
            items = items.filter(Q(name__icontains=search) | Q(location__icontains=search))
        serializer = InventoryItemSerializer(items, many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'add_inventory'):
            return privilege_denied('add_inventory')
        if not (request.data.get('name') or '').strip():
            return Response({'error': 'Name is required'}, status=status.HTTP_400_BAD_REQUEST)
        serializer = InventoryItemSerializer(data=request.data)
        if serializer.is_valid():
            item = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='InventoryItem',
                object_id=item.id,
                object_name=item.name,
                changes={'quantity': item.quantity}
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_detail(request, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(InventoryItem, pk=pk)

    if request.method == 'GET':
        serializer = InventoryItemSerializer(item)
        return Response(serializer.data)
    elif request.method in ['PUT', 'PATCH']:
        if not user_has_privilege(request.user, 'edit_inventory'):
            return privilege_denied('edit_inventory')
        serializer = InventoryItemSerializer(item, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if not user_has_privilege(request.user, 'delete_inventory'):
            return privilege_denied('delete_inventory')
        create_audit_log(
            request=request,
            action='delete',
            model_name='InventoryItem',
            object_id=item.id,
            object_name=item.name
        )
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_adjustment_list_create(request, pk):
    """List an item's adjustments or move quantity in/out"""
    item = get_object_or_404(InventoryItem, pk=pk)

    if request.method == 'GET':
        serializer = InventoryAdjustmentSerializer(item.adjustments.all(), many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'edit_inventory'):
            return privilege_denied('edit_inventory')
        serializer = InventoryAdjustmentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            item = InventoryItem.objects.select_for_update().get(pk=item.pk)
            quantity = serializer.validated_data['quantity']
            if serializer.validated_data['adjustment_type'] == 'out':
                if quantity > item.quantity:
                    return Response(
                        {'error': f'Only {item.quantity} {item.unit} of {item.name} available'},
                        status=status.HTTP_400_BAD_REQUEST
                    )
                item.quantity -= quantity
            else:
                item.quantity += quantity

            if item.quantity == 0 and item.status == 'available':
                item.status = 'out_of_stock'
            elif item.quantity > 0 and item.status == 'out_of_stock':
                item.status = 'available'
            item.save(update_fields=['quantity', 'status', 'updated_at'])
            adjustment = serializer.save(item=item, created_by=request.user.name or request.user.username)

        logger.info(f"Inventory item {item.id} adjusted {adjustment.adjustment_type} {quantity}, now {item.quantity}")
        return Response({
            'adjustment': InventoryAdjustmentSerializer(adjustment).data,
            'item': InventoryItemSerializer(item).data
        }, status=status.HTTP_201_CREATED)
