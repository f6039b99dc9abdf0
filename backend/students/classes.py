"""Static class and stream catalog"""

O_LEVEL_SUBJECTS = ['Mathematics', 'English', 'Physics', 'Chemistry', 'Biology', 'History', 'Geography', 'Literature']
A_LEVEL_SUBJECTS = O_LEVEL_SUBJECTS + ['Economics', 'Computer Science']
ARTS_SUBJECTS = ['English', 'History', 'Geography', 'Literature', 'Economics', 'Religious Education']
SCIENCES_SUBJECTS = ['Mathematics', 'Physics', 'Chemistry', 'Biology', 'Computer Science']


def _o_level(number):
    return {
        'id': str(number),
        'name': f'Senior {number}',
        'level': 'Secondary',
        'subjects': list(O_LEVEL_SUBJECTS),
        'streams': [
            {'id': f'{number}{letter.lower()}', 'name': letter, 'subjects': list(O_LEVEL_SUBJECTS)}
            for letter in ('A', 'B', 'C')
        ],
    }


def _a_level(number):
    return {
        'id': str(number),
        'name': f'Senior {number}',
        'level': 'Advanced',
        'subjects': list(A_LEVEL_SUBJECTS),
        'streams': [
            {'id': f'{number}a', 'name': 'Arts', 'subjects': list(ARTS_SUBJECTS)},
            {'id': f'{number}s', 'name': 'Sciences', 'subjects': list(SCIENCES_SUBJECTS)},
        ],
    }


CLASSES = [_o_level(n) for n in range(1, 5)] + [_a_level(n) for n in (5, 6)]


def get_class(class_id):
    """Return the class with this id, or None"""
    for cls in CLASSES:
        if cls['id'] == str(class_id):
            return cls
    return None
