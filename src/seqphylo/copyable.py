# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "seqphylo"
__author__ = "Patrick Kunzmann"
__all__ = ["Copyable"]

import abc


class Copyable(metaclass=abc.ABCMeta):
    """
    Base class for value objects, that can be duplicated, e.g. trees
    and distance matrices.

    The public method :meth:`copy()` first creates a fresh instance
    via :meth:`__copy_create__()`.
    Attributes that are not handed to the constructor are transferred
    afterwards in :meth:`__copy_fill__()`, starting in the uppermost
    base class.
    """

    def copy(self):
        """
        Copy the object.

        Returns
        -------
        copy
            A copy of this object.
        """
        clone = self.__copy_create__()
        self.__copy_fill__(clone)
        return clone

    def __copy_create__(self):
        """
        Instantiate a new object of this class.

        Only the constructor should be called here.
        This method must be overridden, if the constructor takes
        parameters.

        Returns
        -------
        copy
            A freshly instantiated copy of *self*.
        """
        return type(self)()

    def __copy_fill__(self, clone):
        """
        Copy all attributes, that are not set by the constructor,
        to the new object.

        Always call the `super()` method as first statement.

        Parameters
        ----------
        clone
            The freshly instantiated copy of *self*.
        """
        pass
