"""
chatlens/widgets.py
Android widget class names and the WhatsApp strings the heuristics key on.
"""

TEXT_VIEW     = 'android.widget.TextView'
BUTTON        = 'android.widget.Button'
IMAGE_VIEW    = 'android.widget.ImageView'
VIEW_GROUP    = 'android.view.ViewGroup'
LIST_VIEW     = 'android.widget.ListView'
RECYCLER_VIEW = 'androidx.recyclerview.widget.RecyclerView'

# ── STRINGS ──────────────────────────────────────────────────

DAY_SEPARATORS     = frozenset({'Today', 'Yesterday'})
ENCRYPTION_NOTICE  = 'end-to-end encrypted'
UNREAD_NOTICE      = 'unread messages'
DELIVERY_STATUSES  = frozenset({'Delivered', 'Read', 'Sent'})
SYSTEM_NOTICES     = ('added you', 'changed the group name', 'call')
GROUP_BUTTONS      = frozenset({'GROUP INFO', 'ADD MEMBERS'})
GROUP_INFO_BUTTON  = 'GROUP INFO'
GROUP_SUMMARY      = ('members', 'Group created')
BUBBLE_BOILERPLATE = (ENCRYPTION_NOTICE, 'added you', 'changed the group')
SENDER_PREFIX      = '~ '
SENDER_HINT        = 'Maybe'          # "Maybe Alice" on unsaved group senders
CALL_DIRECTIONS    = ('Outgoing', 'Incoming', 'Missed')
CALL_LIST_CHROME   = frozenset({'Favourites', 'Recent', 'Add favourite'})
ACTIVE_CALL_HINT   = 'voice call'
